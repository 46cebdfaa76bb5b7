"""Reading, writing and converting LucaSystem CZ0 to CZ3 images."""