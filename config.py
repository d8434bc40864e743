"""
BBXX report configuration.
"""

# Station configuration
STATION_CONFIG = {
    "station_id": "WXH9553",      # Ship station callsign (FCC/ITU registered)
}

# Sampling configuration
SAMPLING_CONFIG = {
    "max_samples": 10,            # Latest samples averaged per report
}

# Aggregation configuration
AGGREGATION_CONFIG = {
    "log_samples": True,          # Log each sample's true wind at DEBUG
    "log_summary": True,          # Log data availability summary at INFO
}

# Logging configuration
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
