"""SensorLogEditor: import, trim, and re-export triaxial accelerometer logs."""

__version__ = "0.1.0"
