'''
School Portal Core: fee assignment, fee dashboards and timetable view-state
for the school portal front end.
'''
__version__ = "0.1.0"
