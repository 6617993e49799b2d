"""TrialEngage — multi-tenant backend for clinical-trial site engagement."""
