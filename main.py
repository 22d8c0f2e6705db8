"""SensorLogEditor - Main Entry Point

Batch import, trim, and export of triaxial accelerometer log files.
"""
import sys

from sensor_log_editor.app import main

if __name__ == "__main__":
    sys.exit(main())
