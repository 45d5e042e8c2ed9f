"""AgroStudy: study planner backend for agricultural sciences students."""
