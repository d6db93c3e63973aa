"""Clinic application for the front-desk backend.

Accounts, patient records and appointment scheduling, exposed as a JSON
REST API consumed by the dashboard client.
"""
