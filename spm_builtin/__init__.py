"""Built-in collaborators around the SPM policy core."""
