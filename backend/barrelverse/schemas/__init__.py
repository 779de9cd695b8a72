"""
Pydantic API contracts. Entity schemas (User, Course, Experience, Purchase)
double as the storage layer's return type, so both Storage implementations
hand routes the same shape.
"""
