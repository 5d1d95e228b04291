"""TakeoffPerf - takeoff ground roll and rotation speed estimates from POH chart fits."""

__version__ = "0.1.0"
