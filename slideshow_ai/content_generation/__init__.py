"""Narration and image prompt generation"""
