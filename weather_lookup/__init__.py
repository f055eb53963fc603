"""City weather lookup: geocoding, current conditions, forecast and AQI behind one call."""
