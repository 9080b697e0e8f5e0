import time
import csv
import threading
from contextlib import contextmanager


class Perf:
    """Exclusive/inclusive wall-clock totals per labelled section.

    Totals are shared by all threads; each thread keeps its own section stack so
    nested timing stays correct when queries run concurrently.
    """

    def __init__(self):
        self.totals_exclusive = {}
        self.totals_inclusive = {}
        self.counts = {}
        self.meta = {}
        self._lock = threading.Lock()
        self._local = threading.local()

    def _stack(self):
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    @contextmanager
    def section(self, label: str):
        stack = self._stack()
        frame = {"label": label, "start": time.perf_counter(), "child": 0.0}
        stack.append(frame)
        try:
            yield
        finally:
            dt = time.perf_counter() - frame["start"]
            exclusive = dt - frame["child"]
            with self._lock:
                self.totals_exclusive[label] = self.totals_exclusive.get(label, 0.0) + max(0.0, exclusive)
                self.totals_inclusive[label] = self.totals_inclusive.get(label, 0.0) + dt
                self.counts[label] = self.counts.get(label, 0) + 1
            stack.pop()
            if stack:
                stack[-1]["child"] += dt

    def set_meta(self, **kwargs):
        with self._lock:
            self.meta.update(kwargs)

    def reset(self):
        with self._lock:
            self.totals_exclusive.clear()
            self.totals_inclusive.clear()
            self.counts.clear()
            self.meta.clear()
        self._stack().clear()

    def write_csv(self, path: str):
        with self._lock:
            exclusive = dict(self.totals_exclusive)
            inclusive = dict(self.totals_inclusive)
            counts = dict(self.counts)
            meta = dict(self.meta)
        total_exc = sum(exclusive.values())
        total_inc = sum(inclusive.values())
        with open(path, "w", newline="") as f:
            w = csv.writer(f)
            w.writerow([
                "key",
                "exclusive_sec",
                "inclusive_sec",
                "count",
                "avg_ms",
                "exclusive_percent",
                "triangles_a",
                "triangles_b",
            ])
            tri_a = meta.get("triangles_a", "")
            tri_b = meta.get("triangles_b", "")
            for k in sorted(exclusive.keys()):
                tot_exc = float(exclusive.get(k, 0.0))
                tot_inc = float(inclusive.get(k, 0.0))
                cnt = int(counts.get(k, 0))
                avg_ms = (tot_exc / cnt * 1000.0) if cnt > 0 else 0.0
                pct = (tot_exc / total_exc * 100.0) if total_exc > 0 else 0.0
                w.writerow([k, f"{tot_exc:.9f}", f"{tot_inc:.9f}", cnt, f"{avg_ms:.6f}", f"{pct:.4f}", tri_a, tri_b])
            w.writerow(["TOTAL", f"{total_exc:.9f}", f"{total_inc:.9f}", "", "", "100.00", tri_a, tri_b])


perf = Perf()
