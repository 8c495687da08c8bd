SENSOR_COLUMNS = ("Sensor1", "Sensor2", "Sensor3", "Sensor4", "Sensor5")
READING_COLUMNS = ("Timestamp", *SENSOR_COLUMNS, "Magnitude", "Latitude", "Longitude")
SCORE_COLUMN = "AnomalyScore"
SEVERITY_COLUMN = "Severity"
