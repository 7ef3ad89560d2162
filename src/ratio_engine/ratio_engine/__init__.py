"""Classroom ratio engine package.

Organized by feature modules (ratios, occupancy, classrooms, ...) with a thin
Flask controller layer over service/repository layers.
"""
