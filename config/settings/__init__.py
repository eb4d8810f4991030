"""Settings package for the space booking service.

`base.py` holds configuration shared by every environment; `dev.py`,
`prod.py` and `test.py` layer environment specific overrides on top.
"""
