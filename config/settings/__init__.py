"""Settings package for the car-rental booking service.

`base.py` holds the configuration shared by every environment; `dev.py`,
`prod.py` and `test.py` override it.
"""
