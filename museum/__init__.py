"""
Backend package for the museum exhibit application.

This package provides a FastAPI application that stores paintings, renders
their QR codes, records visitor scans, aggregates usage analytics and asks
Gemini for painting descriptions.
"""
