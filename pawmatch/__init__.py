"""PawMatch notification and matching service package.

The package re-exports nothing; sub-packages are imported explicitly by the
application entrypoint and the maintenance scripts.
"""
