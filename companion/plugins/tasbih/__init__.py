from .counter import TasbihCounter, TasbihRegistry
