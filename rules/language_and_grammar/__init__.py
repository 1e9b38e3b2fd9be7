"""Detector passes for Past Simple / Past Continuous grammar."""
