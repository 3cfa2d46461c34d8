"""
GoTrain - AI weekly training plans from your Strava and Hevy history.

Generates a structured 7-day plan from saved goals and recent activity,
then revises it through a coach chat.
"""

__version__ = "0.1.0"
