"""ShockGlobe: a QPainter globe renderer for shock propagation scenarios."""
