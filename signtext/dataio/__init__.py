from .replay import LoggedFrame, load_prediction_log, replay

__all__ = ["LoggedFrame", "load_prediction_log", "replay"]
