"""
Calendar of BDL events: month grid and iCal export.
"""
