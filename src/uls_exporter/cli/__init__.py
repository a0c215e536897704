"""Command-line interface for the ULS exporter"""
