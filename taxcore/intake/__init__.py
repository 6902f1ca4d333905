"""intake — request contracts and business-rule validation."""
