"""Base classes for core components"""
