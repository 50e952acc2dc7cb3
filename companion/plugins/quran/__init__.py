from .quran_base import AlQuranCloudBackend
