"""Adapters binding the domain ports to Salesforce, inference and storage backends."""
