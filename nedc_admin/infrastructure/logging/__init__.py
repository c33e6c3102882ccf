# Hybrid logging (console + log files)
