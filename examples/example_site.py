"""
Example script: pwvideo export examples/example_site.py --output-path example.mp4
"""


async def run(ctx):
    await ctx.visit("https://example.com")
    await ctx.wait_until_satisfied(lambda: ctx.exists("h1"))

    ctx.resume()
    await ctx.move_to_element(selector="h1")
    await ctx.sleep(500)
    await ctx.click_link(text="More information...", delay=800)
    await ctx.sleep(1500)
    ctx.pause()
