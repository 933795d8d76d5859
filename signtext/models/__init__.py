from .classical import ClassicalModel, ImageClassifier, LandmarkClassifier, SymbolClassifier, build_classifier

__all__ = ["ClassicalModel", "ImageClassifier", "LandmarkClassifier", "SymbolClassifier", "build_classifier"]
