"""Exam Prep Companion backend."""
