from enum import Enum


class DeliveryOption(Enum):
    NORMAL = "normal"
    EXPRESS = "express"
