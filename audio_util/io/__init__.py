from audio_util.io.wav import read_wave, write_wave
