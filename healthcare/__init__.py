"""HealthCare+ appointment backend."""
