"""Core services: validation, dispatch, formatting and the pipeline that ties them."""
