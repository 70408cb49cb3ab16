"""IntelliPark parking-reservation backend."""
