from abc import ABC, abstractmethod

from components.errors import NoFaceDetectedError

class ROISelector(ABC):
    def select(self, candidates):
        """Pick the winning box out of ``candidates``.

        Raises:
            NoFaceDetectedError: if ``candidates`` is empty.
        """
        if not candidates:
            raise NoFaceDetectedError("No face candidates to select from")
        return self._select(candidates)

    @abstractmethod
    def _select(self, candidates):
        pass
