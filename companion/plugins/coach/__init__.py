from .client import CoachAdvice, CoachClient, DuaRecommendation
