"""
recorder.py
------------
Records the cooperator fraction over time for the presentation layer.
"""

from abc import ABC, abstractmethod


class DataRecorder(ABC):
    """
    Data recorder
    -------------
    Collects (tick, cooperator fraction) samples while a session runs.
    """

    def __init__(self):
        self.records = {'t': [],
                        'coop_rate': [],
                        }

    @abstractmethod
    def record(self, t, coop):
        """
        Args:
            t (int): current tick count
            coop (float): cooperator fraction
        Returns:
            None
        """
        pass

    def reset(self):
        for series in self.records.values():
            series.clear()

    def __len__(self):
        return len(self.records['t'])


class DefaultDataRecorder(DataRecorder):
    """
    Default recorder
    ----------------
    Keeps every sample while the series is short, then only every tenth
    tick. A sample is stored only when the tick has advanced.
    """

    def __init__(self, max_dense=900, stride=10):
        """
        Args:
            max_dense (int): samples stored unconditionally
            stride (int): tick stride once ``max_dense`` samples are stored
        """
        super().__init__()
        self.max_dense = max_dense
        self.stride = stride

    def record(self, t, coop):
        ts = self.records['t']
        if ts and ts[-1] >= t:
            return
        if len(ts) < self.max_dense or t % self.stride == 0:
            ts.append(t)
            self.records['coop_rate'].append(coop)
