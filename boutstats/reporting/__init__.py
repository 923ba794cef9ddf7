"""Report writers consuming pipeline outputs."""
