import os
import sys
from pathlib import Path

# Render figures without a display
os.environ.setdefault("MPLBACKEND", "Agg")

sys.path.append(str(Path(__file__).resolve().parents[1]))
