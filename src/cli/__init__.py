"""CLI module for the complaint tracker."""

from src.cli.complaints import app as complaint_app
from src.cli.main import app, main
from src.cli.remind import app as remind_app

__all__ = ["app", "complaint_app", "main", "remind_app"]
