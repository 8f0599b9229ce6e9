#!/usr/bin/env python3
"""
Main entry point for the Practice Planner web application.

This script launches the Flask-based web server.
"""
import os

from practice_planner.ui.web_app import run_web_app
from practice_planner.utils import DEFAULT_DATA_FILE

if __name__ == "__main__":
    # Keep practice data next to this script
    project_root = os.path.dirname(os.path.abspath(__file__))
    run_web_app(data_file=os.path.join(project_root, DEFAULT_DATA_FILE))
