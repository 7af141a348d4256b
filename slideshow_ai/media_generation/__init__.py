"""Narration audio and image generation"""
