# badges/conditions.py

def gte(value, target):
    return value is not None and target is not None and value >= target
