"""Weekly lecture scheduling for academic divisions."""
