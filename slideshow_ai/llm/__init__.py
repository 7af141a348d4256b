"""Shared OpenAI client"""
