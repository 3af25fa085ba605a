"""Operating system collaborators."""
