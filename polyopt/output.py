"""Console logging and JSON result files."""
import json
import math
import os
from datetime import datetime


def log(msg):
    """Timestamped, flushed log line."""
    ts = datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def fmt_bound(x, digits=10):
    """Format a bound, keeping the +/-inf sentinels readable."""
    if x is None:
        return "-"
    if math.isinf(x):
        return "+inf" if x > 0 else "-inf"
    return f"{x:.{digits}f}"


def _jsonable(x):
    # json has no inf; keep the sentinels as strings
    if isinstance(x, float) and math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if isinstance(x, dict):
        return {k: _jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_jsonable(v) for v in x]
    return x


def save_results(results, path):
    """Save results to JSON (atomic via temp file)."""
    tmp = path + ".tmp"
    with open(tmp, 'w') as f:
        json.dump(_jsonable(results), f, indent=2, default=str)
    os.replace(tmp, path)
