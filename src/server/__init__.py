"""HTTP front end for cftranscoder."""
