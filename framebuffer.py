WIDTH = 64
HEIGHT = 32


class Framebuffer:
    """64x32 monochrome screen.

    Pixels are addressed by (x, y) only; both coordinates wrap around the
    screen edges, so callers never deal with the row-major layout of `gfx`.
    """

    def __init__(self, width=WIDTH, height=HEIGHT):
        self.width = width
        self.height = height
        self.gfx = bytearray(width*height)

    def _index(self, x, y):
        return (x % self.width) + (y % self.height)*self.width

    def get_pixel(self, x, y):
        return bool(self.gfx[self._index(x, y)])

    def set_pixel(self, x, y, on):
        self.gfx[self._index(x, y)] = int(bool(on))

    def clear(self):
        self.gfx = bytearray(self.width*self.height)

    def pixels(self):
        for i, on in enumerate(self.gfx):
            yield i % self.width, i // self.width, bool(on)

    def draw_sprite(self, x, y, rows, xor=False):
        """Draw an 8-pixel-wide sprite with its top left corner at (x, y).

        Each byte of `rows` is one line, most significant bit on the left.
        Every row and column wraps around independently.

        With the default rule a set bit turns an off pixel on and leaves an
        on pixel alone; the return value says whether any pixel was turned
        on. With `xor` the sprite is XORed onto the screen and the return
        value says whether any pixel was turned off.
        """
        flag = False
        for sy, row in enumerate(rows):
            for sx in range(8):
                if not row & (128 >> sx):
                    continue
                index = self._index(x + sx, y + sy)
                was_on = self.gfx[index]
                if xor:
                    self.gfx[index] ^= 1
                    if was_on:
                        flag = True
                elif not was_on:
                    self.gfx[index] = 1
                    flag = True
        return flag
