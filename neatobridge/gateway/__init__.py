"""Device cloud gateway: abstract interfaces and stubs."""
