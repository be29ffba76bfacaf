from pathlib import Path

# Project Root
PROJECT_ROOT = Path(__file__).resolve().parent

# Data Directory
DATA_DIR = PROJECT_ROOT / "data"

RAW_DIR = DATA_DIR / "raw"
PROCESSED_DIR = DATA_DIR / "processed"

# Raw Input Paths
TEMPERATURE_CSV = RAW_DIR / "nyc_monthly_temperature.csv"
RAINFALL_CSV = RAW_DIR / "nyc_monthly_precipitation.csv"
TRAFFIC_CSV = RAW_DIR / "Automated_Traffic_Volume_Counts.csv"
EMERGENCY_CSV = RAW_DIR / "Emergency_Response_Times.csv"

# Derived Outputs
INTEGRATED_CSV = PROCESSED_DIR / "integrated_dataset.csv"
ENGINEERED_CSV = PROCESSED_DIR / "engineered_dataset.csv"

# Reports
REPORTS_DIR = PROJECT_ROOT / "reports"

TEST_RESULTS_DIR = REPORTS_DIR / "test_results"
CARDS_DIR = REPORTS_DIR / "cards"
FIGURES_DIR = REPORTS_DIR / "figures"

# Modeling
RANDOM_SEED = 42
TRAIN_FRACTION = 0.8
TOP_K = 10

# Traffic counts file is several GB; cap rows read per run
TRAFFIC_ROW_CAP = 500_000

TARGET_COL = "Vol"

BOROUGHS = ["Bronx", "Brooklyn", "Manhattan", "Queens", "Staten Island"]

# Synthetic integrated dataset
SYNTHETIC_YEAR = 2023

WEEKDAY_VOL_MEAN, WEEKDAY_VOL_STD = 550.0, 150.0
WEEKEND_VOL_MEAN, WEEKEND_VOL_STD = 400.0, 100.0

TEMP_BASELINE_F = 55.0
TEMP_AMPLITUDE_F = 20.0
TEMP_NOISE_STD_F = 5.0
RAIN_SCALE_IN = 0.15

# SHAP / LIME
SHAP_MAX_SAMPLES = 500
LIME_NUM_FEATURES = 10
STABILITY_RUNS = 5

# NOAA "Climate at a Glance" missing-value sentinels
NOAA_MISSING_VALUES = [-99, -99.9, -99.99, -9999]
