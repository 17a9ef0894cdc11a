"""Kivy front end. Only radar_geometry is importable without Kivy."""
