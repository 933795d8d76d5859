import numpy as np

from signtext.realtime.recognizer import FrameRecognizer
from signtext.realtime.stabilizer import Prediction


class FakeHand:
    landmarks = np.zeros((21, 3), dtype=np.float32)

    def bounding_box(self, width, height, padding=25):
        return (0, 0, min(width, padding), min(height, padding))


class FakeHands:
    def __init__(self, hands):
        self.hands = hands

    def process_image(self, frame):
        return self.hands


class FixedClassifier:
    def classify(self, landmarks, frame, bbox):
        return Prediction("A", 0.8)


class BrokenClassifier:
    def classify(self, landmarks, frame, bbox):
        raise ValueError("bad input")


FRAME = np.zeros((48, 64, 3), dtype=np.uint8)


def test_no_hand_means_no_prediction():
    rec = FrameRecognizer(FakeHands([]), FixedClassifier())
    assert rec.recognize(FRAME) is None


def test_prediction_carries_bbox():
    rec = FrameRecognizer(FakeHands([FakeHand()]), FixedClassifier(), bbox_padding=10)
    pred = rec.recognize(FRAME)
    assert pred == Prediction("A", 0.8, bbox=(0, 0, 10, 10))


def test_classifier_error_becomes_no_prediction():
    rec = FrameRecognizer(FakeHands([FakeHand()]), BrokenClassifier())
    assert rec.recognize(FRAME) is None
    assert rec.frames_seen == 1
