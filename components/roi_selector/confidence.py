from components.roi_selector.base import ROISelector

class HighestConfidence(ROISelector):
    """Highest confidence wins; ties go to the larger box, then to detector order."""

    def _select(self, candidates):
        return max(candidates, key=lambda box: (box.confidence, box.area))
