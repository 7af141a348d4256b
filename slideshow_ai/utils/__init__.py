"""Configuration and logging setup"""
