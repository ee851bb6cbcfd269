"""Progress reporting for the document assembler."""

from tqdm import tqdm


class ProgressObserver:
    """Receives progress signals. Every method is a no-op by default."""

    def set_total(self, total):
        pass

    def increment(self):
        pass

    def set_status(self, text):
        pass

    def image_skipped(self, result):
        pass

    def finish(self, text):
        pass


class TqdmProgress(ProgressObserver):
    """Progress bar on stderr, one unit per post.

    The bar is created on ``set_total`` so nothing is drawn for runs that
    fail before the first post.
    """

    BAR_FORMAT = "{desc} [{elapsed}] |{bar:40}| {n_fmt}/{total_fmt} {postfix}"

    def __init__(self, desc="Posts", **tqdm_kwargs):
        self.desc = desc
        self.tqdm_kwargs = tqdm_kwargs
        self.bar = None

    def set_total(self, total):
        self.bar = tqdm(total=total, desc=self.desc, unit="post",
                        bar_format=self.BAR_FORMAT, **self.tqdm_kwargs)

    def increment(self):
        if self.bar is not None:
            self.bar.update(1)

    def set_status(self, text):
        if self.bar is not None:
            self.bar.set_postfix_str(text)

    def image_skipped(self, result):
        tqdm.write(f"Skipped image ({result.status.value}): {result.identifier}")

    def finish(self, text):
        if self.bar is not None:
            self.bar.set_postfix_str(text)
            self.bar.close()
