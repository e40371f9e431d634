from components.roi_selector.base import ROISelector

class LargestArea(ROISelector):
    """Largest box wins, the way single-subject croppers usually pick a face."""

    def _select(self, candidates):
        return max(candidates, key=lambda box: (box.area, box.confidence))
