"""Geometry and bounding box utilities."""

def xyxy_to_xywh(xyxy):
    """Convert x1,y1,x2,y2 format to top-left x,y plus width,height."""
    x1, y1, x2, y2 = xyxy
    return [x1, y1, x2 - x1, y2 - y1]

def xywh_to_xyxy(xywh):
    """Convert top-left x,y plus width,height to x1,y1,x2,y2 format."""
    x, y, w, h = xywh
    return [x, y, x + w, y + h]

def vertical_center(y, height):
    """Vertical center of a box given its top edge and height."""
    return y + height / 2.0

def vertical_distance(center_a, center_b):
    """Absolute distance between two vertical centers."""
    return abs(center_a - center_b)
