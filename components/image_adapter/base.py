from abc import ABC, abstractmethod

class ImageAdapter(ABC):
  @abstractmethod
  def decode(self, image):
    pass

  @abstractmethod
  def encode(self, matrix):
    pass
