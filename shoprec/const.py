from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

# Setting that names the primary recommender algorithm.
ALGORITHM_ENV = "RECOMMENDER_ALGORITHM"
